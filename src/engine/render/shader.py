"""
どこで: `engine.render.shader`。
何を: GLSL 3.30 のシェーダ文字列と、ModernGL プログラム生成 `Shader`。
なぜ: 材質描画（テクスチャ + 簡易 PBR 照明）と補助線描画のプログラムを一箇所で用意するため。

標準材質シェーダ:
- UV は `uv * uv_repeat + uv_offset`（REPEAT ラップ前提）。
- `flat_shading` が真なら画面空間微分 `cross(dFdx(p), dFdy(p))` による面法線、偽なら頂点法線 `in_normal` の補間。
  いずれも視点側へ向け直す（両面描画のため）。
- 環境光 + 最大 `MAX_LIGHTS` 個の平行光（Lambert 拡散 + Blinn-Phong 鏡面、粗さで鋭さを決める）。
- `base_color.a * texel.a < alpha_test` のフラグメントは破棄する。
"""

from __future__ import annotations

from typing import Any

MAX_LIGHTS = 4

_STANDARD_VERT = """
#version 330
uniform mat4 projection;
uniform mat4 view;
uniform mat4 model;
uniform vec2 uv_repeat;
uniform vec2 uv_offset;
in vec3 in_position;
in vec3 in_normal;
in vec2 in_uv;
out vec3 v_world;
out vec3 v_normal;
out vec2 v_uv;
void main() {
    vec4 world = model * vec4(in_position, 1.0);
    v_world = world.xyz;
    v_normal = mat3(model) * in_normal;
    v_uv = in_uv * uv_repeat + uv_offset;
    gl_Position = projection * view * world;
}
"""

_STANDARD_FRAG = """
#version 330
#define MAX_LIGHTS %(max_lights)d
uniform sampler2D map;
uniform vec4 base_color;
uniform float alpha_test;
uniform float roughness;
uniform float metalness;
uniform int flat_shading;
uniform vec3 camera_position;
uniform vec3 ambient_radiance;
uniform int light_count;
uniform vec3 light_direction[MAX_LIGHTS];
uniform vec3 light_radiance[MAX_LIGHTS];
in vec3 v_world;
in vec3 v_normal;
in vec2 v_uv;
out vec4 f_color;
void main() {
    vec4 diffuse = base_color * texture(map, v_uv);
    if (diffuse.a < alpha_test) {
        discard;
    }
    vec3 n = flat_shading != 0
        ? normalize(cross(dFdx(v_world), dFdy(v_world)))
        : normalize(v_normal);
    vec3 v = normalize(camera_position - v_world);
    if (dot(n, v) < 0.0) {
        n = -n;
    }
    vec3 albedo = diffuse.rgb * (1.0 - metalness);
    vec3 f0 = mix(vec3(0.04), diffuse.rgb, metalness);
    float r4 = max(pow(roughness, 4.0), 1e-4);
    float shininess = max(2.0 / r4 - 2.0, 1.0);
    vec3 color = ambient_radiance * albedo;
    for (int i = 0; i < light_count; ++i) {
        vec3 l = light_direction[i];
        float nl = max(dot(n, l), 0.0);
        vec3 h = normalize(l + v);
        float spec = pow(max(dot(n, h), 0.0), shininess) * (shininess + 2.0) / 8.0;
        color += light_radiance[i] * nl * (albedo + f0 * spec);
    }
    f_color = vec4(color, diffuse.a);
}
""" % {"max_lights": MAX_LIGHTS}

_LINE_VERT = """
#version 330
uniform mat4 projection;
uniform mat4 view;
in vec3 in_vert;
void main() {
    gl_Position = projection * view * vec4(in_vert, 1.0);
}
"""

_LINE_FRAG = """
#version 330
uniform vec4 color;
out vec4 f_color;
void main() {
    f_color = color;
}
"""


class Shader:
    """ModernGL プログラムの生成口。"""

    @staticmethod
    def create_standard_program(ctx: Any) -> Any:
        return ctx.program(vertex_shader=_STANDARD_VERT, fragment_shader=_STANDARD_FRAG)

    @staticmethod
    def create_line_program(ctx: Any) -> Any:
        return ctx.program(vertex_shader=_LINE_VERT, fragment_shader=_LINE_FRAG)


def set_uniform(program: Any, name: str, value: Any) -> bool:
    """uniform が存在すれば値を設定する（最適化で消えた uniform は無視）。

    `bytes` は `write`、それ以外は `.value` へ代入する。設定したら True。
    """
    uniform = program.get(name, None)
    if uniform is None:
        return False
    if isinstance(value, (bytes, bytearray)):
        uniform.write(value)
    else:
        uniform.value = value
    return True


__all__ = ["MAX_LIGHTS", "Shader", "set_uniform"]

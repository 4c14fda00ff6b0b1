"""
どこで: `engine.core.camera`。
何を: 透視投影カメラ `PerspectiveCamera` と行列ヘルパ（perspective / look_at）。
なぜ: 画面比・視点・注視点から ModernGL へ渡す投影/ビュー行列を一箇所で作るため。

行列は数学的な行優先（列ベクトル右掛け）で保持し、GPU へは `.T` した float32 を書き込む。
"""

from __future__ import annotations

import numpy as np

from common.types import Vec3


def perspective(fov_deg: float, aspect: float, near: float, far: float) -> np.ndarray:
    """OpenGL 互換の透視投影行列 `(4,4)` を返す。"""
    f = 1.0 / np.tan(np.radians(fov_deg) / 2.0)
    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = (far + near) / (near - far)
    m[2, 3] = 2.0 * far * near / (near - far)
    m[3, 2] = -1.0
    return m


def look_at(eye: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    """`eye` から `target` を見るビュー行列 `(4,4)` を返す。"""
    eye = np.asarray(eye, dtype=np.float64)
    target = np.asarray(target, dtype=np.float64)
    up = np.asarray(up, dtype=np.float64)
    f = target - eye
    norm = np.linalg.norm(f)
    if norm == 0.0:
        # 視点と注視点が重なる場合は -Z を向く
        f = np.array([0.0, 0.0, -1.0])
    else:
        f = f / norm
    s = np.cross(f, up)
    s_norm = np.linalg.norm(s)
    if s_norm == 0.0:
        # up と視線が平行: 別の up で作り直す
        s = np.cross(f, np.array([0.0, 0.0, 1.0]) if abs(f[2]) < 0.9 else np.array([1.0, 0.0, 0.0]))
        s_norm = np.linalg.norm(s)
    s = s / s_norm
    u = np.cross(s, f)
    m = np.eye(4, dtype=np.float64)
    m[0, :3] = s
    m[1, :3] = u
    m[2, :3] = -f
    m[0, 3] = -np.dot(s, eye)
    m[1, 3] = -np.dot(u, eye)
    m[2, 3] = np.dot(f, eye)
    return m


def to_gl(matrix: np.ndarray) -> bytes:
    """行優先の `(4,4)` 行列を ModernGL の uniform 用バイト列（列優先 float32）にする。"""
    return np.ascontiguousarray(np.asarray(matrix, dtype=np.float32).T).tobytes()


class PerspectiveCamera:
    """透視投影カメラ。

    `position` は可変の `(3,)` 配列で、アニメータ/OrbitControls が直接書き換える。
    `fov/near/far` は生成後に変えない想定で、リサイズでは `aspect` のみ更新する。
    """

    def __init__(
        self,
        fov: float = 75.0,
        aspect: float = 1.0,
        near: float = 0.1,
        far: float = 100.0,
        *,
        position: Vec3 = (0.0, 0.0, 2.0),
        up: Vec3 = (0.0, 1.0, 0.0),
    ) -> None:
        if near <= 0.0 or far <= near:
            raise ValueError(f"invalid clip planes: near={near}, far={far}")
        if aspect <= 0.0:
            raise ValueError(f"aspect must be > 0, got {aspect}")
        self.fov = float(fov)
        self.aspect = float(aspect)
        self.near = float(near)
        self.far = float(far)
        self.position = np.array(position, dtype=np.float64)
        self.up = np.array(up, dtype=np.float64)
        self.target = np.zeros(3, dtype=np.float64)
        self.projection_matrix = perspective(self.fov, self.aspect, self.near, self.far)

    def update_projection_matrix(self) -> None:
        """`fov/aspect/near/far` から投影行列を作り直す。"""
        self.projection_matrix = perspective(self.fov, self.aspect, self.near, self.far)

    def look_at(self, target: np.ndarray | Vec3) -> None:
        """注視点を設定する（ビュー行列は `view_matrix` で都度計算）。"""
        self.target = np.array(target, dtype=np.float64)

    @property
    def view_matrix(self) -> np.ndarray:
        return look_at(self.position, self.target, self.up)

    def set_position(self, x: float, y: float, z: float) -> None:
        self.position[0] = x
        self.position[1] = y
        self.position[2] = z


__all__ = ["PerspectiveCamera", "perspective", "look_at", "to_gl"]

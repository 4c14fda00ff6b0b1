"""
どこで: `api.animation`（フレーム毎の更新）。
何を: テクスチャのスクロールとポインタ追従カメラを進める `RibbonAnimator`（Tickable）。
なぜ: 時間に依存する状態変化を 1 箇所に集め、描画前に毎フレーム確定させるため。

毎 tick:
- `elapsed += dt`
- 表テクスチャ offset.x = `elapsed / scroll_period`、裏は符号反転（逆向きに流れる）
- カメラ x/y = `lerp(現在値, pointer * follow_scale, follow_lerp)`、z は `camera_z` に固定
- `controls.update()`

lerp 係数は tick 毎の定数なので、追従の速さはフレームレートに依存する。
"""

from __future__ import annotations

from engine.core.camera import PerspectiveCamera
from engine.core.orbit_controls import OrbitControls
from engine.io.pointer import PointerState
from engine.render.types import TextureSlot


def lerp(a: float, b: float, t: float) -> float:
    return (1.0 - t) * a + t * b


class RibbonAnimator:
    def __init__(
        self,
        camera: PerspectiveCamera,
        controls: OrbitControls,
        pointer: PointerState,
        front: TextureSlot | None,
        back: TextureSlot | None,
        *,
        scroll_period: float = 20.0,
        follow_scale: float = 0.5,
        follow_lerp: float = 0.1,
        camera_z: float = 2.0,
    ) -> None:
        if scroll_period <= 0.0:
            raise ValueError(f"scroll_period must be > 0, got {scroll_period}")
        self.camera = camera
        self.controls = controls
        self.pointer = pointer
        self.front = front
        self.back = back
        self.scroll_period = float(scroll_period)
        self.follow_scale = float(follow_scale)
        self.follow_lerp = float(follow_lerp)
        self.camera_z = float(camera_z)
        self.elapsed = 0.0

    def tick(self, dt: float) -> None:
        self.elapsed += float(dt)
        shift = self.elapsed / self.scroll_period
        if self.front is not None:
            self.front.set_offset_x(shift)
        if self.back is not None:
            self.back.set_offset_x(-shift)

        pos = self.camera.position
        self.camera.set_position(
            lerp(float(pos[0]), self.pointer.x * self.follow_scale, self.follow_lerp),
            lerp(float(pos[1]), self.pointer.y * self.follow_scale, self.follow_lerp),
            self.camera_z,
        )
        self.controls.update()


__all__ = ["RibbonAnimator", "lerp"]

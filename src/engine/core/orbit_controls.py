"""
どこで: `engine.core.orbit_controls`。
何を: 注視点まわりにカメラを回す/寄せる `OrbitControls`（慣性減衰つき）。
なぜ: ドラッグとホイールの入力を球面座標の差分として溜め、毎フレーム少しずつ適用するため。

状態:
- `_delta_theta/_delta_phi`: 未適用の回転量（ラジアン）。
- `_scale`: 次の update で半径へ掛ける倍率。

減衰ありの update は未適用量の `damping_factor` 倍だけ適用し、残りを `(1 - damping_factor)`
倍に減らす。未適用量が無い update はカメラ位置に一切触れず、注視点を向き直すだけ。
"""

from __future__ import annotations

import math

import numpy as np

from common.types import Vec3

from .camera import PerspectiveCamera

# 極付近での特異点回避
_POLAR_EPS = 1e-6
# これ未満の残留回転は 0 に丸める
_REST_EPS = 1e-7


class OrbitControls:
    def __init__(
        self,
        camera: PerspectiveCamera,
        *,
        target: Vec3 = (0.0, 0.0, 0.0),
        enable_damping: bool = True,
        damping_factor: float = 0.05,
        rotate_speed: float = 1.0,
        zoom_speed: float = 1.0,
        min_distance: float = 0.0,
        max_distance: float = math.inf,
    ) -> None:
        if not 0.0 < damping_factor <= 1.0:
            raise ValueError(f"damping_factor must be in (0, 1], got {damping_factor}")
        self.camera = camera
        self.target = np.array(target, dtype=np.float64)
        self.enable_damping = bool(enable_damping)
        self.damping_factor = float(damping_factor)
        self.rotate_speed = float(rotate_speed)
        self.zoom_speed = float(zoom_speed)
        self.min_distance = float(min_distance)
        self.max_distance = float(max_distance)
        self._delta_theta = 0.0
        self._delta_phi = 0.0
        self._scale = 1.0
        self.camera.look_at(self.target)

    # ---- 入力 ----------------------------------------------------------
    def rotate(self, dx_px: float, dy_px: float, viewport_height: float) -> None:
        """ポインタ移動量（px、dy は下向き正）を回転量として溜める。"""
        h = max(1.0, float(viewport_height))
        self._delta_theta -= 2.0 * math.pi * float(dx_px) / h * self.rotate_speed
        self._delta_phi -= 2.0 * math.pi * float(dy_px) / h * self.rotate_speed

    def dolly(self, scale: float) -> None:
        """半径倍率を溜める（1 未満で寄る）。"""
        if scale <= 0.0:
            raise ValueError(f"dolly scale must be > 0, got {scale}")
        self._scale *= float(scale)

    def zoom(self, steps: float) -> None:
        """ホイール量（正で寄る）を半径倍率として溜める。"""
        self.dolly(0.95 ** (float(steps) * self.zoom_speed))

    @property
    def has_pending_motion(self) -> bool:
        return self._delta_theta != 0.0 or self._delta_phi != 0.0 or self._scale != 1.0

    # ---- 更新 ----------------------------------------------------------
    def update(self) -> bool:
        """溜まった入力を適用し、カメラを注視点へ向ける。位置が動いたら True。"""
        if not self.has_pending_motion:
            self.camera.look_at(self.target)
            return False

        offset = self.camera.position - self.target
        radius = float(np.linalg.norm(offset))
        if radius == 0.0:
            theta = 0.0
            phi = math.pi / 2.0
        else:
            theta = math.atan2(offset[0], offset[2])
            phi = math.acos(min(1.0, max(-1.0, offset[1] / radius)))

        if self.enable_damping:
            theta += self._delta_theta * self.damping_factor
            phi += self._delta_phi * self.damping_factor
        else:
            theta += self._delta_theta
            phi += self._delta_phi
        phi = min(math.pi - _POLAR_EPS, max(_POLAR_EPS, phi))

        radius = min(self.max_distance, max(self.min_distance, radius * self._scale))

        sin_phi = math.sin(phi)
        new_offset = np.array(
            [radius * sin_phi * math.sin(theta), radius * math.cos(phi), radius * sin_phi * math.cos(theta)]
        )
        before = self.camera.position.copy()
        self.camera.position[:] = self.target + new_offset
        self.camera.look_at(self.target)

        if self.enable_damping:
            self._delta_theta *= 1.0 - self.damping_factor
            self._delta_phi *= 1.0 - self.damping_factor
            if abs(self._delta_theta) < _REST_EPS:
                self._delta_theta = 0.0
            if abs(self._delta_phi) < _REST_EPS:
                self._delta_phi = 0.0
        else:
            self._delta_theta = 0.0
            self._delta_phi = 0.0
        self._scale = 1.0

        return bool(np.linalg.norm(self.camera.position - before) > _POLAR_EPS)


__all__ = ["OrbitControls"]

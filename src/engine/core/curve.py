"""
どこで: `engine.core.curve`。
何を: 閉じた Catmull-Rom スプライン `CatmullRomCurve`（弧長パラメータ化・Frenet フレーム計算付き）。
なぜ: 少数の制御点から滑らかな閉曲線を作り、リボンの芯線と局所座標系を得るため。

パラメータの 2 系統:
- `t`（0..1）: 制御点区間に対して一様なパラメータ。`get_point(t)`。
- `u`（0..1）: 弧長に対して一様なパラメータ。`get_point_at(u)`。`get_u_to_t(u)` で変換。

補間方式（`curve_type`）:
- `"centripetal"`（既定）/`"chordal"`: 区間長に応じた非一様 Catmull-Rom（指数 0.25 / 0.5）。
- `"catmullrom"`: 一様 Catmull-Rom。接線の強さに `tension` を用いる。

閉曲線（`closed=True`）では `get_point(0)` と `get_point(1)` が同じ制御点区間・同じ
重み 0 に落ちるため、両端はビット単位で一致する。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

_CURVE_TYPES = ("centripetal", "chordal", "catmullrom")
_TANGENT_DELTA = 1e-4
_EPSILON = float(np.finfo(np.float64).eps)


@dataclass(frozen=True)
class FrenetFrames:
    """サンプル毎の正規直交フレーム。各配列は形状 `(segments+1, 3)`、float64。"""

    tangents: np.ndarray
    normals: np.ndarray
    binormals: np.ndarray

    def __len__(self) -> int:
        return int(self.tangents.shape[0])


def _rotate_about_axes(vectors: np.ndarray, axes: np.ndarray, angles: np.ndarray) -> np.ndarray:
    """Rodrigues の回転公式（行毎に軸/角度が異なるバッチ版）。`axes` は単位ベクトル。"""
    cos_a = np.cos(angles)[:, None]
    sin_a = np.sin(angles)[:, None]
    dots = np.sum(axes * vectors, axis=1, keepdims=True)
    return vectors * cos_a + np.cross(axes, vectors) * sin_a + axes * dots * (1.0 - cos_a)


def _normalize_rows(v: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(v, axis=1, keepdims=True)
    return np.divide(v, n, out=np.zeros_like(v), where=n > 0.0)


class CatmullRomCurve:
    """制御点列を通る 3D Catmull-Rom スプライン。

    Parameters
    ----------
    points : array_like
        形状 `(K, 3)` の制御点（K >= 2）。
    closed : bool, default True
        True で末尾→先頭の区間を含む閉曲線。
    curve_type : {"centripetal", "chordal", "catmullrom"}
        補間方式。
    tension : float, default 0.1
        `curve_type="catmullrom"` のときの接線係数。
    arc_length_divisions : int, default 200
        弧長テーブルの分割数。
    """

    def __init__(
        self,
        points: np.ndarray,
        *,
        closed: bool = True,
        curve_type: str = "centripetal",
        tension: float = 0.1,
        arc_length_divisions: int = 200,
    ) -> None:
        pts = np.array(points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] != 3:
            raise ValueError(f"points must have shape (K, 3), got {pts.shape}")
        if pts.shape[0] < 2:
            raise ValueError("CatmullRomCurve needs at least 2 control points")
        if curve_type not in _CURVE_TYPES:
            raise ValueError(f"unknown curve_type: {curve_type!r}; allowed={_CURVE_TYPES}")
        if int(arc_length_divisions) < 1:
            raise ValueError("arc_length_divisions must be >= 1")
        pts.setflags(write=False)
        self.points = pts
        self.closed = bool(closed)
        self.curve_type = curve_type
        self.tension = float(tension)
        self.arc_length_divisions = int(arc_length_divisions)
        self._lengths_cache: tuple[int, np.ndarray] | None = None

    # ------------------------------------------------------------------ #
    # 点の評価                                                            #
    # ------------------------------------------------------------------ #
    def _evaluate(self, ts: np.ndarray) -> np.ndarray:
        """パラメータ列 `ts`（形状 `(M,)`）に対する点列 `(M, 3)` を返す。"""
        points = self.points
        count = points.shape[0]
        ts = np.asarray(ts, dtype=np.float64)

        p = (count - (0 if self.closed else 1)) * ts
        int_point = np.floor(p).astype(np.int64)
        weight = p - int_point

        if self.closed:
            wrap = (np.floor(np.abs(int_point) / count).astype(np.int64) + 1) * count
            int_point = np.where(int_point > 0, int_point, int_point + wrap)
        else:
            at_end = (weight == 0.0) & (int_point == count - 1)
            int_point = np.where(at_end, count - 2, int_point)
            weight = np.where(at_end, 1.0, weight)

        p1 = points[int_point % count]
        p2 = points[(int_point + 1) % count]
        if self.closed:
            p0 = points[(int_point - 1) % count]
            p3 = points[(int_point + 2) % count]
        else:
            head = 2.0 * points[0] - points[1]
            tail = 2.0 * points[count - 1] - points[count - 2]
            p0 = np.where((int_point > 0)[:, None], points[(int_point - 1) % count], head)
            p3 = np.where((int_point + 2 < count)[:, None], points[(int_point + 2) % count], tail)

        if self.curve_type == "catmullrom":
            t1 = self.tension * (p2 - p0)
            t2 = self.tension * (p3 - p1)
        else:
            power = 0.5 if self.curve_type == "chordal" else 0.25
            dt0 = np.power(np.sum((p1 - p0) ** 2, axis=1), power)
            dt1 = np.power(np.sum((p2 - p1) ** 2, axis=1), power)
            dt2 = np.power(np.sum((p3 - p2) ** 2, axis=1), power)
            # 重複点の近傍では区間長を流用する
            dt1 = np.where(dt1 < 1e-4, 1.0, dt1)
            dt0 = np.where(dt0 < 1e-4, dt1, dt0)
            dt2 = np.where(dt2 < 1e-4, dt1, dt2)
            dt0, dt1, dt2 = dt0[:, None], dt1[:, None], dt2[:, None]
            t1 = (p1 - p0) / dt0 - (p2 - p0) / (dt0 + dt1) + (p2 - p1) / dt1
            t2 = (p2 - p1) / dt1 - (p3 - p1) / (dt1 + dt2) + (p3 - p2) / dt2
            t1 = t1 * dt1
            t2 = t2 * dt1

        # エルミート 3 次式 c0 + c1 w + c2 w^2 + c3 w^3
        c0 = p1
        c1 = t1
        c2 = -3.0 * p1 + 3.0 * p2 - 2.0 * t1 - t2
        c3 = 2.0 * p1 - 2.0 * p2 + t1 + t2
        w = weight[:, None]
        w2 = w * w
        w3 = w2 * w
        return c0 + c1 * w + c2 * w2 + c3 * w3

    def get_point(self, t: float) -> np.ndarray:
        """`t`（0..1）の点 `(3,)` を返す。"""
        return self._evaluate(np.array([t], dtype=np.float64))[0]

    def get_points(self, divisions: int = 5) -> np.ndarray:
        """`t` を一様に `divisions` 分割した `divisions+1` 点 `(divisions+1, 3)`。"""
        d = int(divisions)
        if d < 1:
            raise ValueError("divisions must be >= 1")
        return self._evaluate(np.arange(d + 1, dtype=np.float64) / d)

    # ------------------------------------------------------------------ #
    # 弧長                                                                #
    # ------------------------------------------------------------------ #
    def get_lengths(self, divisions: int | None = None) -> np.ndarray:
        """累積弦長テーブル `(divisions+1,)` を返す（先頭は 0、同一分割数ならキャッシュ）。"""
        d = self.arc_length_divisions if divisions is None else int(divisions)
        if self._lengths_cache is not None and self._lengths_cache[0] == d:
            return self._lengths_cache[1]
        pts = self.get_points(d)
        seg = np.linalg.norm(np.diff(pts, axis=0), axis=1)
        lengths = np.concatenate(([0.0], np.cumsum(seg)))
        lengths.setflags(write=False)
        self._lengths_cache = (d, lengths)
        return lengths

    def get_length(self) -> float:
        """曲線全長（弦長近似）。"""
        return float(self.get_lengths()[-1])

    def _u_to_t(self, us: np.ndarray) -> np.ndarray:
        arc = self.get_lengths()
        il = arc.shape[0]
        target = np.asarray(us, dtype=np.float64) * arc[-1]
        # target 以下となる最大の index
        i = np.searchsorted(arc, target, side="right") - 1
        i = np.clip(i, 0, il - 2)
        before = arc[i]
        seg_len = arc[i + 1] - before
        safe = np.where(seg_len > 0.0, seg_len, 1.0)
        fraction = np.where(seg_len > 0.0, (target - before) / safe, 0.0)
        ts = (i + fraction) / (il - 1)
        exact = arc[i] == target
        return np.where(exact, i / (il - 1), ts)

    def get_u_to_t(self, u: float) -> float:
        """弧長パラメータ `u` を区間パラメータ `t` へ写す。"""
        return float(self._u_to_t(np.array([u], dtype=np.float64))[0])

    def get_point_at(self, u: float) -> np.ndarray:
        """弧長パラメータ `u` の点 `(3,)`。"""
        return self.get_point(self.get_u_to_t(u))

    def get_spaced_points(self, divisions: int = 5) -> np.ndarray:
        """弧長一様な `divisions+1` 点 `(divisions+1, 3)`。閉曲線なら先頭と末尾は一致する。"""
        d = int(divisions)
        if d < 1:
            raise ValueError("divisions must be >= 1")
        us = np.arange(d + 1, dtype=np.float64) / d
        return self._evaluate(self._u_to_t(us))

    # ------------------------------------------------------------------ #
    # 接線とフレーム                                                       #
    # ------------------------------------------------------------------ #
    def _tangents(self, ts: np.ndarray) -> np.ndarray:
        ts = np.asarray(ts, dtype=np.float64)
        t1 = np.maximum(ts - _TANGENT_DELTA, 0.0)
        t2 = np.minimum(ts + _TANGENT_DELTA, 1.0)
        return _normalize_rows(self._evaluate(t2) - self._evaluate(t1))

    def get_tangent(self, t: float) -> np.ndarray:
        """`t` での単位接線（中心差分、端は片側）。"""
        return self._tangents(np.array([t], dtype=np.float64))[0]

    def get_tangent_at(self, u: float) -> np.ndarray:
        """弧長パラメータ `u` での単位接線。"""
        return self.get_tangent(self.get_u_to_t(u))

    def compute_frenet_frames(self, segments: int, closed: bool = False) -> FrenetFrames:
        """弧長一様な `segments+1` 箇所で (tangent, normal, binormal) を計算する。

        法線は先頭フレームから接線の回転に合わせて平行移動で運び、ねじれの少ない
        フレーム列を得る。`closed=True` では末尾と先頭の法線のずれ角を全サンプルへ
        等分に配り、継ぎ目でフレームが跳ばないようにする。
        """
        n = int(segments)
        if n < 1:
            raise ValueError("segments must be >= 1")
        us = np.arange(n + 1, dtype=np.float64) / n
        tangents = self._tangents(self._u_to_t(us))

        # 初期法線: 接線の成分が最も小さい軸から作る
        t0 = tangents[0]
        tx, ty, tz = np.abs(t0)
        axis = np.array([1.0, 0.0, 0.0])
        smallest = tx
        if ty <= smallest:
            smallest = ty
            axis = np.array([0.0, 1.0, 0.0])
        if tz <= smallest:
            axis = np.array([0.0, 0.0, 1.0])
        side = np.cross(t0, axis)
        side /= np.linalg.norm(side)

        normals = np.empty_like(tangents)
        binormals = np.empty_like(tangents)
        normals[0] = np.cross(t0, side)
        binormals[0] = np.cross(t0, normals[0])

        for i in range(1, n + 1):
            normal = normals[i - 1]
            rot_axis = np.cross(tangents[i - 1], tangents[i])
            length = float(np.linalg.norm(rot_axis))
            if length > _EPSILON:
                rot_axis = rot_axis / length
                theta = float(np.arccos(np.clip(np.dot(tangents[i - 1], tangents[i]), -1.0, 1.0)))
                normal = _rotate_about_axes(
                    normal[None, :], rot_axis[None, :], np.array([theta])
                )[0]
            normals[i] = normal
            binormals[i] = np.cross(tangents[i], normal)

        if closed:
            theta = float(np.arccos(np.clip(np.dot(normals[0], normals[n]), -1.0, 1.0))) / n
            if float(np.dot(tangents[0], np.cross(normals[0], normals[n]))) > 0.0:
                theta = -theta
            idx = np.arange(1, n + 1)
            normals[1:] = _rotate_about_axes(normals[1:], tangents[1:], theta * idx)
            binormals[1:] = np.cross(tangents[1:], normals[1:])

        return FrenetFrames(tangents=tangents, normals=normals, binormals=binormals)


__all__ = ["CatmullRomCurve", "FrenetFrames"]

"""
どこで: `engine.render` サブパッケージ。
何を: メッシュ/補助線 → GPU 転送・描画の入口。材質/光源の型と SceneRenderer/MeshBuffer/LineMesh/Shader を提供。
なぜ: 計算（core/shapes）と描画の責務を分離し、GPU リソース管理を局所化するため。

GL 依存のクラスは各モジュールから直接 import する（このパッケージの import 自体は GL 不要）。
"""

from .types import AmbientLight, DirectionalLight, HelperLines, Material, TextureSlot

__all__ = ["AmbientLight", "DirectionalLight", "HelperLines", "Material", "TextureSlot"]

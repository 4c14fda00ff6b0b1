"""
どこで: `engine.core` サブパッケージ。
何を: フレーム駆動（Tickable/FrameClock）・描画ウィンドウ・カーブ/メッシュ/ポリライン表現・カメラと操作系。
なぜ: 計算と描画の基盤を構成し、上位層（api/render）から再利用可能にするため。
"""

"""
どこで: `api.sketch_runner`。
何を: `api.sketch` の補助（実行パラメータ解決、ウィンドウ/GL 初期化）。
なぜ: ランナー本体を薄く保つため。
"""

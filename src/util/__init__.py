"""
どこで: `util` パッケージ。
何を: 設定ファイル読込・アセットパス解決・色正規化の小ヘルパ群。
なぜ: engine/api の双方から参照する I/O 寄りの補助を一箇所にまとめるため。
"""

# -*- coding: utf-8 -*-
"""
calendar_solver 全体で共通して使う設定値をまとめたモジュールです。

solve() の引数で個別に上書きしない場合は、ここの値が使われます。
- アーク整合の方式（1パス / AC-3）
- 探索中の forward checking の有無
- 探索ノード数の上限
- 会議数の上限
- ログレベル
などを簡単に変更できます。
"""

from __future__ import annotations

import os

# ==== 前処理（制約伝播）関連 ===============================================

# アーク整合の方式。
#   "single_pass" : 各二項制約（と反転した制約）を1回ずつ適用するだけ
#   "ac3"         : AC-3 で不動点まで繰り返し伝播する
ARC_CONSISTENCY_MODE: str = "single_pass"

# 受け付けるアーク整合の方式一覧
ARC_CONSISTENCY_MODES = ("single_pass", "ac3")

# ==== 探索関連 =============================================================

# 値を割り当てるたびに、隣接する未割り当て変数のドメインを
# 単項制約に落として絞り込むかどうか。
FORWARD_CHECKING: bool = True

# バックトラック探索で展開するノード数の上限。
# None の場合は上限なし（解が見つかるか、探索し尽くすまで続けます）。
MAX_SEARCH_NODES: int | None = None

# 受け付ける会議数の上限。
# 探索は会議1つにつき1段再帰するので、これを超える入力は InvalidProblemError にします。
MAX_MEETINGS: int = 5000

# 何ノードごとに探索の進捗をログに出すか
PROGRESS_LOG_INTERVAL: int = 10000

# 解が見つかったあと、全制約を再チェックするかどうか
VERIFY_SOLUTION: bool = True

# ==== ログ関連 =============================================================

LOG_LEVEL: str = os.getenv("CALENDAR_SOLVER_LOG_LEVEL", "INFO")

# ==== その他 ===============================================================

# solve() などのキーワード引数が省略されたことを表す目印。
# max_nodes=None は「上限なし」なので、省略とは区別する。
USE_CONFIG = object()

# -*- coding: utf-8 -*-
"""
calendar_solver.csp パッケージ

カレンダー CSP（制約充足）に関する処理をまとめています。

主に以下の役割を持つモジュールから構成されています。
- domains.py     : 会議ごとのドメイン（取り得る日付のリスト）
- constraints.py : 制約の評価・反転・関連判定
- propagation.py : ノード整合・アーク整合による前処理
- search.py      : MRV 付きバックトラック探索
"""

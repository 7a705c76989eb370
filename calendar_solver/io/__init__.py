# -*- coding: utf-8 -*-
"""
calendar_solver.io パッケージ

制約を CSV / pandas.DataFrame から読み込む処理をまとめています。
"""

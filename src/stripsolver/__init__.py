"""StripSolver - コード断片の出典リポジトリ推定ボット"""

__version__ = "0.1.0"

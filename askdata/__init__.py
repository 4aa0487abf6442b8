"""Natural-language questions over tabular data: SQL generation, guarded execution, charts and explanations"""

__version__ = "1.0.0"

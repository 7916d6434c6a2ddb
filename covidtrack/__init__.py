"""
CovidTrack

COVID-19 时间序列导入与聚合
"""

__version__ = "1.0.0"

"""
餐厅管理系统后端服务
"""

__version__ = "1.0.0"

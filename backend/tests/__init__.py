"""
测试包
"""

"""HTTP роутеры API"""

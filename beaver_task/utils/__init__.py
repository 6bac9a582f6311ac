"""Вспомогательные функции: время, логирование, порядок, пароли"""

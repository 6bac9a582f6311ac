"""Общие Pydantic модели API"""

"""Core services"""

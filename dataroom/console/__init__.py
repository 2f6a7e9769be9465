"""Admin console screens"""

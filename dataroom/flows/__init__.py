"""Investor-facing flows built on the API client and session"""

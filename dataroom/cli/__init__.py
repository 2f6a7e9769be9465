"""Command line interface for investors and admins"""

"""Homestay BFF gateway application"""

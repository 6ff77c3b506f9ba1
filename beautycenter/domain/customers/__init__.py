"""Customers domain"""

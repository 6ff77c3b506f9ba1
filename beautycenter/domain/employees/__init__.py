"""Employees domain"""

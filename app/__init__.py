"""MedImage Gateway"""

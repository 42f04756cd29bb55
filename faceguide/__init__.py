"""Landmark based alignment of a reference face image over a comparison image"""

"""
Pure domain services: codec, reveal sequencing, CDI contract and review.
"""

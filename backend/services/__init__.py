"""
Services package - upstream client, cache, aggregation and report orchestration.
"""

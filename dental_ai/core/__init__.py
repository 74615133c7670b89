"""
Core analysis pipeline: models, stages and orchestration.
"""

"""Stroke classification and observation scheduling engine.

Leaf-first: entities → shape_classifier → activity / dedupe / update_scheduler
→ observation_queue → session. Import from the submodules directly.
"""

"""Benchmark statistics engine for benchgate.

Parses raw benchmark output, pairs old and new samples per operation and
metric, computes robust deltas and evaluates threshold checks against
them.
"""

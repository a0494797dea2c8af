"""
Services Package

Exchange-agnostic pipeline stages:
- aggregator: concurrent, failure-isolated snapshot collection
- opportunity_detector: spot-futures and cross-exchange detection (pure)
- ranker: ordering, truncation and summary
- funding_collector: merged funding-rate listing
- scanner: the Query Interface tying the stages together
"""

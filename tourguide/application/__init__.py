"""Application services: reservation use cases, fan-out, aggregation and polling."""

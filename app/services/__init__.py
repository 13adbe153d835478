"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Services apply the domain rules (coverage, task lifecycle, triage, SLA)
through repositories and register their collection snapshots with the
change feed.
"""

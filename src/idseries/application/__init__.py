"""
Application layer (use-cases, orchestration, policies).

- Ports decouple the issuance logic from the counter storage.
- The series registry holds the static series configuration.
"""

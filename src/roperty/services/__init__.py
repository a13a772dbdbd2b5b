"""Service layer — the store facade and the operations behind the CLI.

Services sit between the domain model and infrastructure. CLI-facing
services return :class:`~roperty.services.result.ServiceResult`.
"""

"""RU: Стадии сборки в порядке их запуска пайплайном.

EN: Build stages, in the order the pipeline runs them.

- ``resolve_stage``: plugin directories, GPL flag and target matrix.
- ``invoke_stage``: container runtime detection and the container run.
- ``package_stage``: artifact collection and the checksum manifest.
"""

"""
Service context for log lines.

Identifies the running instance as `service@environment:pid` so logs from
several marketplace processes can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'ticket-marketplace')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    instance_id = os.getenv('INSTANCE_ID') or str(os.getpid())
    return f'{service_name}@{deploy_env}:{instance_id}'

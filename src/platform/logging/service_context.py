"""
Service identification for log lines, so entries from several API workers
behind one load balancer can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'booking-engine')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    # HOSTNAME is the container id under docker / k8s, fall back to PID locally
    instance = os.getenv('HOSTNAME', '')[:12] or str(os.getpid())
    return f'{service_name}@{deploy_env}:{instance}'

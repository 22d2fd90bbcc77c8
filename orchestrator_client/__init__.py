from orchestrator_client.client.jobs import JobClient
from orchestrator_client.client.polling import CancelToken
from orchestrator_client.config import Settings

"""Key builders, namespaced per user and entity type.

A non-empty prefix (e.g. "v2:") isolates deployments sharing one store.
"""


class KeySpace:
    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def block(self, user_id: str, block_id: str) -> str:
        return f"{self.prefix}block:{user_id}:{block_id}"

    def blocks(self, user_id: str) -> str:
        return f"{self.prefix}blocks:{user_id}"

    def energy_log(self, user_id: str, log_id: str) -> str:
        return f"{self.prefix}energy_log:{user_id}:{log_id}"

    def energy_logs(self, user_id: str, day: str) -> str:
        return f"{self.prefix}energy_logs:{user_id}:{day}"

    def energy_pattern(self, user_id: str) -> str:
        return f"{self.prefix}energy_pattern:{user_id}"

    def block_tasks(self, user_id: str, block_id: str, day: str) -> str:
        return f"{self.prefix}block_tasks:{user_id}:{block_id}:{day}"

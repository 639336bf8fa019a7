import threading

from securecrypt.models import AnalysisResult, OperationEvent

CATEGORIES = ("financial", "identity", "personal", "professional")


class EncryptionStats:
    """
    Session counters for a dashboard.

    Pass an instance as the ``observer`` of encrypt/decrypt calls; it is
    called with an OperationEvent after each completed operation. The cipher
    engine itself never holds this state.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.total_operations = 0
        self.files_encrypted = 0
        self.text_encrypted = 0
        self.sensitive_content_detected = 0
        self.category_count = {category: 0 for category in CATEGORIES}

    def __call__(self, event: OperationEvent):
        self.record(event)

    def record(self, event: OperationEvent):
        with self._lock:
            self.total_operations += 1
            if event.operation == "encrypt":
                if event.kind == "file":
                    self.files_encrypted += 1
                else:
                    self.text_encrypted += 1

    def record_analysis(self, result: AnalysisResult):
        if not result.should_encrypt or not result.detected_keywords:
            return
        with self._lock:
            self.sensitive_content_detected += 1
            if result.category in self.category_count:
                self.category_count[result.category] += 1

    @property
    def sensitive_percentage(self) -> int:
        with self._lock:
            if self.total_operations == 0:
                return 0
            return int(self.sensitive_content_detected / self.total_operations * 100 + 0.5)

    def snapshot(self) -> dict:
        percentage = self.sensitive_percentage
        with self._lock:
            return {
                "total_operations": self.total_operations,
                "files_encrypted": self.files_encrypted,
                "text_encrypted": self.text_encrypted,
                "sensitive_content_detected": self.sensitive_content_detected,
                "sensitive_percentage": percentage,
                "category_count": dict(self.category_count),
            }

"""Example: drive the service layer directly (no Flask).

Controllers stay thin; the business rules and audit trail live in the service.
"""

from src.umeedai.umeedai.container import build_container
from src.umeedai.umeedai.core.enums import Operator


def main():
    container = build_container(storage_backend="memory", audit_log_path="logs/example-audit.log")
    service = container.threshold_service

    service.create_threshold(factor="attendance_pct", operator=Operator.LT, value=75, description="Low attendance")
    service.update_threshold_by_factor("attendance_pct", changes={"value": 60})
    print([t.to_dict() for t in service.get_all_thresholds()])
    print(service.reset_all_thresholds())


if __name__ == "__main__":
    main()

from datetime import datetime
from app.core import config


def write_audit_log(actor: str, actor_role: str, action: str, details: str = ""):
    logs_dir = config.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    month_str = datetime.now().strftime("%Y_%m")
    log_file = logs_dir / f"audit_{month_str}.log"
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    with open(log_file, "a", encoding="utf-8") as f:
        f.write(f"{ts} | {actor_role} | {actor} | {action} | {details}\n")

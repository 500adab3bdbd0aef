"""DAG for syncing the KRX security master every 6 hours."""
from datetime import datetime
from airflow import DAG
from airflow.operators.python import PythonOperator
from stockweather.infrastructure.airflow_tasks import sync_security_master, validate_securities

# DAG configuration
default_args = {
    "owner": "stockweather",
    "start_date": datetime(2024, 1, 1),
    "retries": 1,
}

dag = DAG(
    "security_master_sync",
    default_args=default_args,
    description="Validate and sync the security master every 6 hours",
    schedule="0 */6 * * *",
    catchup=False,
    max_active_runs=1,
    tags=["security_master", "krx"],
)


def validate_task():
    """Fail the run before touching ClickHouse if the seed is broken."""
    result = validate_securities()
    if result["status"] != "valid":
        raise ValueError(f"Security master seed is invalid: {result}")
    return result


def sync_task():
    result = sync_security_master(limit_check=10)
    if result["status"] == "error":
        raise RuntimeError(result["error"])
    return result


validate = PythonOperator(
    task_id="validate_securities",
    python_callable=validate_task,
    dag=dag,
)

sync = PythonOperator(
    task_id="sync_security_master",
    python_callable=sync_task,
    dag=dag,
)

validate >> sync

"""Console script targets, one per check."""

import sys

from aws_plugins.core.runtime.runners import run_individual_check


def _entrypoint(check_name):
    sys.exit(run_individual_check(check_name, sys.argv[1:]))


def check_alb_target_group_health():
    _entrypoint("check-alb-target-group-health")


def check_cloudwatch_alarm():
    _entrypoint("check-cloudwatch-alarm")


def check_cloudwatch_alarms():
    _entrypoint("check-cloudwatch-alarms")


def check_cloudwatch_composite_metric():
    _entrypoint("check-cloudwatch-composite-metric")


def check_ebs_burst_limit():
    _entrypoint("check-ebs-burst-limit")


def check_ebs_snapshots():
    _entrypoint("check-ebs-snapshots")


def check_ec2_cpu_balance():
    _entrypoint("check-ec2-cpu_balance")


def check_ec2_filter():
    _entrypoint("check-ec2-filter")


def check_ec2_network():
    _entrypoint("check-ec2-network")


def metrics_ec2_count():
    _entrypoint("metrics-ec2-count")


def metrics_ec2_filter():
    _entrypoint("metrics-ec2-filter")


def check_elb_certs():
    _entrypoint("check-elb-certs")


def check_elb_health_fog():
    _entrypoint("check-elb-health-fog")


def check_elb_health_sdk():
    _entrypoint("check-elb-health-sdk")


def check_elb_instances_inservice():
    _entrypoint("check-elb-instances-inservice")


def check_elb_latency():
    _entrypoint("check-elb-latency")


def check_elb_nodes():
    _entrypoint("check-elb-nodes")


def check_elb_sum_requests():
    _entrypoint("check-elb-sum-requests")


def metrics_elb():
    _entrypoint("metrics-elb")


def check_rds():
    _entrypoint("check-rds")


def check_rds_events():
    _entrypoint("check-rds-events")


def check_rds_pending():
    _entrypoint("check-rds-pending")


def metrics_rds():
    _entrypoint("metrics-rds")


def check_s3_bucket():
    _entrypoint("check-s3-bucket")


def check_s3_bucket_visibility():
    _entrypoint("check-s3-bucket-visibility")


def check_s3_object():
    _entrypoint("check-s3-object")


def check_s3_tag():
    _entrypoint("check-s3-tag")


def metrics_s3():
    _entrypoint("metrics-s3")

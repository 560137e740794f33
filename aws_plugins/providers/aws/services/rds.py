"""RDS service wrapper."""

GIB = 1024 ** 3

# Memory in GiB per instance class.
MEMORY_GIB_BY_CLASS = {
    "db.cr1.8xlarge": 244.0,
    "db.m1.small": 1.7,
    "db.m1.medium": 3.75,
    "db.m1.large": 7.5,
    "db.m1.xlarge": 15.0,
    "db.m2.xlarge": 17.1,
    "db.m2.2xlarge": 34.2,
    "db.m2.4xlarge": 68.4,
    "db.m3.medium": 3.75,
    "db.m3.large": 7.5,
    "db.m3.xlarge": 15.0,
    "db.m3.2xlarge": 30.0,
    "db.m4.large": 8.0,
    "db.m4.xlarge": 16.0,
    "db.m4.2xlarge": 32.0,
    "db.m4.4xlarge": 64.0,
    "db.m4.10xlarge": 160.0,
    "db.m4.16xlarge": 256.0,
    "db.m5.large": 8.0,
    "db.m5.xlarge": 16.0,
    "db.m5.2xlarge": 32.0,
    "db.m5.4xlarge": 64.0,
    "db.m5.12xlarge": 192.0,
    "db.m5.24xlarge": 384.0,
    "db.r3.large": 15.0,
    "db.r3.xlarge": 30.5,
    "db.r3.2xlarge": 61.0,
    "db.r3.4xlarge": 122.0,
    "db.r3.8xlarge": 244.0,
    "db.r4.large": 15.25,
    "db.r4.xlarge": 30.5,
    "db.r4.2xlarge": 61.0,
    "db.r4.4xlarge": 122.0,
    "db.r4.8xlarge": 244.0,
    "db.r4.16xlarge": 488.0,
    "db.t1.micro": 0.615,
    "db.t2.micro": 1.0,
    "db.t2.small": 2.0,
    "db.t2.medium": 4.0,
    "db.t2.large": 8.0,
    "db.t2.xlarge": 16.0,
    "db.t2.2xlarge": 32.0,
    "db.x1.16xlarge": 976.0,
    "db.x1.32xlarge": 1952.0,
    "db.x1e.xlarge": 122.0,
    "db.x1e.2xlarge": 244.0,
    "db.x1e.4xlarge": 488.0,
    "db.x1e.8xlarge": 976.0,
    "db.x1e.16xlarge": 1952.0,
    "db.x1e.32xlarge": 3904.0,
}


def memory_total_bytes(instance_class):
    """Total memory of *instance_class* in bytes, or ``None`` when unknown."""
    gib = MEMORY_GIB_BY_CLASS.get(instance_class)
    if gib is None:
        return None
    return gib * GIB


def describe_instances(rds_client, instance_ids=None):
    kwargs = {}
    if instance_ids:
        kwargs["Filters"] = [{"Name": "db-instance-id", "Values": list(instance_ids)}]
    return rds_client.describe_db_instances(**kwargs).get("DBInstances", [])


def get_instance(rds_client, instance_id):
    instances = describe_instances(rds_client, [instance_id])
    return instances[0] if instances else None


def cluster_writer_ids(rds_client, cluster_id):
    """Writer instance ids of *cluster_id*, or ``None`` if the cluster is missing."""
    clusters = rds_client.describe_db_clusters(
        Filters=[{"Name": "db-cluster-id", "Values": [cluster_id]}]
    ).get("DBClusters", [])
    if not clusters:
        return None
    return [
        member["DBInstanceIdentifier"]
        for member in clusters[0].get("DBClusterMembers", [])
        if member.get("IsClusterWriter")
    ]

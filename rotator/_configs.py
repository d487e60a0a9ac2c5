#: Auto Scaling lifecycle states that matter while rotating instances. An
#: instance is only detached once it reports IN_SERVICE and the group is
#: considered up to capacity when the number of IN_SERVICE instances matches
#: the desired capacity of the group.
PENDING_STATE = "Pending"
IN_SERVICE_STATE = "InService"
DETACHING_STATE = "Detaching"
DETACHED_STATE = "Detached"

#: Instances in any of these lifecycle states are already on their way out
#: of the group, most likely from a previous partial rotation, and are never
#: detached or shut down again.
TERMINATING_STATES = (
    "Terminating",
    "Terminating:Wait",
    "Terminating:Proceed",
    "Terminated",
)

#: EC2 power states in which an instance is considered shut down and so safe
#: to terminate without interrupting in-flight work.
STOPPING_STATE = "stopping"
STOPPED_STATE = "stopped"
SHUT_DOWN_STATES = (STOPPING_STATE, STOPPED_STATE)

GROUP_RESOURCE_TYPE = "AWS::AutoScaling::AutoScalingGroup"
INSTANCE_NOT_FOUND_CODES = ("InvalidInstanceID.NotFound", "InvalidInstanceID.Malformed")

#: Remote command used to gracefully stop a worker instance.
SHUTDOWN_COMMAND = "sudo shutdown -h now"
SSH_OPTIONS = (
    "UserKnownHostsFile=/dev/null",
    "StrictHostKeyChecking=no",
    "BatchMode=yes",
    "ConnectTimeout=10",
)
#: Seconds to wait for the shutdown command before giving up on it.
SHUTDOWN_TIMEOUT = 60

#: Outcomes recorded for the individual items handled during teardown.
TERMINATED = "terminated"
NOT_FOUND = "not_found"
STILL_RUNNING = "still_running"
DELETED = "deleted"
FAILED = "failed"

#: Progress message statuses.
SUCCESS = "success"
FAILURE = "failure"
CONTINUE = "continue"

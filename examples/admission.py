"""Example admission check against the sample queue policy."""

from queueacl import QueueGuard, UserGroup, load_policy
from queueacl.exceptions import AccessDenied

policy = load_policy("examples/policy.yaml")
guard = QueueGuard(policy)

requests = [
    ("root.batch", UserGroup.of("alice"), "submit"),
    ("root.batch.etl", UserGroup.of("zoe", ["analysts"]), "submit"),
    ("root.batch", UserGroup.of("zoe", ["analysts"]), "admin"),
    ("root.sandbox", UserGroup.of("guest"), "submit"),
]


def main() -> None:
    for queue, identity, action in requests:
        try:
            decision = guard.require(queue, identity, action)
        except AccessDenied as exc:
            print(f"DENY  {exc}")
            continue
        print(f"ALLOW {identity.user} {action} {queue} ({decision.reason})")


if __name__ == "__main__":
    main()

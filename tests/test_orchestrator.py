"""Tests for the orchestrator (fake runner, no subprocesses)."""

import threading
import time

from cmdsweep.execution.operations import plan_commands
from cmdsweep.execution.orchestrator import run_all, run_template
from cmdsweep.execution.poller import CheckState, PollPolicy
from cmdsweep.execution.runner import CommandResult

FAST = PollPolicy(interval=0)


class FakeNeutron:
    """Pretends to be the neutron CLI: creates succeed, shows report ACTIVE."""

    def __init__(self, failing=(), delay=0.0):
        self.failing = set(failing)
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, command):
        with self._lock:
            self.calls.append(command)
        if self.delay:
            time.sleep(self.delay)
        args = command.split()
        if command in self.failing:
            return CommandResult(command=command, exitcode=1, error="boom", duration=0.1)
        if args[1].endswith("-show"):
            output = {"id": args[2], "provisioning_status": "ACTIVE"}
        else:
            output = {"id": f"id-{args[-1]}"}
        return CommandResult(command=command, output=output, exitcode=0, duration=0.1)


class TestRunAll:
    def test_results_in_order_with_seqnums(self):
        fake = FakeNeutron()
        commands = [
            "neutron lbaas-loadbalancer-list",
            "neutron lbaas-loadbalancer-show lb1",
        ]

        results = run_all(commands, runner=fake, policy=FAST)

        assert [r.command for r in results] == commands
        assert [r.seqnum for r in results] == [1, 2]
        assert [r.checked for r in results] == [
            "lbaas-loadbalancer-list done",
            "lbaas-loadbalancer-show done",
        ]

    def test_create_is_followed_by_show(self):
        fake = FakeNeutron()

        results = run_all(
            ["neutron lbaas-loadbalancer-create --name lb1"], runner=fake, policy=FAST
        )

        assert fake.calls == [
            "neutron lbaas-loadbalancer-create --name lb1",
            "neutron lbaas-loadbalancer-show id-lb1",
        ]
        assert results[0].checked == "id-lb1: ACTIVE"
        assert results[0].check_state == CheckState.SUCCEEDED.value

    def test_failed_command_is_not_checked_and_batch_continues(self):
        failing = "neutron lbaas-loadbalancer-create --name lb1"
        fake = FakeNeutron(failing=[failing])

        results = run_all(
            [failing, "neutron lbaas-loadbalancer-create --name lb2"],
            runner=fake,
            policy=FAST,
        )

        assert len(results) == 2
        assert results[0].exitcode == 1
        assert results[0].checked == ""
        assert results[0].check_state is None
        assert results[1].checked == "id-lb2: ACTIVE"
        assert fake.calls.count("neutron lbaas-loadbalancer-show id-lb1") == 0

    def test_empty_batch(self):
        assert run_all([], runner=FakeNeutron()) == []

    def test_independent_invocations(self):
        fake = FakeNeutron()
        first = run_all(["neutron lbaas-pool-list"], runner=fake)
        second = run_all(["neutron lbaas-pool-list"], runner=fake)
        assert len(first) == len(second) == 1
        assert first[0] is not second[0]


class TestConcurrency:
    def test_parallel_keeps_input_order(self):
        fake = FakeNeutron(delay=0.05)
        planned = plan_commands(
            "neutron lbaas-loadbalancer-create --name lb%{x}",
            {"x": [str(i) for i in range(6)]},
        )

        results = run_all(planned, runner=fake, policy=FAST, concurrency=3)

        assert [r.seqnum for r in results] == [1, 2, 3, 4, 5, 6]
        assert [r.checked for r in results] == [f"id-lb{i}: ACTIVE" for i in range(6)]

    def test_show_follows_its_create(self):
        fake = FakeNeutron(delay=0.01)
        planned = plan_commands(
            "neutron lbaas-loadbalancer-create --name lb%{x}",
            {"x": ["1", "2", "3", "4"]},
        )

        run_all(planned, runner=fake, policy=FAST, concurrency=4)

        for i in ["1", "2", "3", "4"]:
            create = fake.calls.index(f"neutron lbaas-loadbalancer-create --name lb{i}")
            show = fake.calls.index(f"neutron lbaas-loadbalancer-show id-lb{i}")
            assert create < show

    def test_shared_dependency_key_runs_serially(self):
        fake = FakeNeutron(delay=0.01)
        planned = plan_commands(
            "neutron lbaas-pool-update pool1 --name %{n}",
            {"n": ["a", "b", "c"]},
            dependency_key=lambda command: command.split()[2],
        )

        run_all(planned, runner=fake, policy=FAST, concurrency=3)

        updates = [c for c in fake.calls if "-update" in c]
        assert updates == [p.command for p in planned]


class TestRunTemplate:
    def test_scenario(self):
        fake = FakeNeutron()

        results = run_template(
            "neutron lbaas-loadbalancer-create --name lb%{x} %{y}",
            {"x": ["1", "2"], "y": ["private-subnet"]},
            runner=fake,
            policy=FAST,
        )

        assert [r.command for r in results] == [
            "neutron lbaas-loadbalancer-create --name lb1 private-subnet",
            "neutron lbaas-loadbalancer-create --name lb2 private-subnet",
        ]
        assert all(r.check_state == CheckState.SUCCEEDED.value for r in results)

    def test_pruned_template_runs_nothing(self):
        fake = FakeNeutron()
        assert run_template("neutron lbaas-pool-show %{p}", {"p": []}, runner=fake) == []
        assert fake.calls == []

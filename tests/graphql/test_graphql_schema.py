"""End-to-end tests through the strawberry schema."""

from types import SimpleNamespace

from gymadmin.graphql.schema import schema

CREATE_SCHEDULE = """
mutation Create($input: CreateClassScheduleInput!) {
  createClassSchedule(input: $input) {
    success
    message
    errorCode
    instancesCreated
    schedule { id daysOfWeek }
  }
}
"""

SCHEDULE_INSTANCES = """
query Instances($scheduleId: Int!) {
  scheduleInstances(scheduleId: $scheduleId) {
    id
    status
    availableActions
    availableSpots
  }
}
"""


def _context(db):
    return SimpleNamespace(db=db)


def _schedule_input(**overrides):
    values = {
        "name": "Morning Yoga",
        "classType": "yoga",
        "instructorId": 7,
        "capacity": 1,
        "durationMin": 60,
        "startDate": "2024-01-01",
        "startTime": "09:00",
        "scheduleType": "recurring",
        "daysOfWeek": [1, 3],
        "recurrenceEndDate": "2024-01-15",
    }
    values.update(overrides)
    return values


async def test_create_schedule_materializes_instances(db):
    result = await schema.execute(
        CREATE_SCHEDULE, variable_values={"input": _schedule_input()}, context_value=_context(db)
    )

    assert result.errors is None
    payload = result.data["createClassSchedule"]
    assert payload["success"] is True
    assert payload["instancesCreated"] == 5
    assert payload["schedule"]["daysOfWeek"] == [1, 3]

    instances = await schema.execute(
        SCHEDULE_INSTANCES,
        variable_values={"scheduleId": int(payload["schedule"]["id"])},
        context_value=_context(db),
    )
    first = instances.data["scheduleInstances"][0]
    assert first["status"] == "scheduled"
    assert first["availableActions"] == ["start", "cancel"]
    assert first["availableSpots"] == 1


async def test_invalid_schedule_returns_error_code(db):
    result = await schema.execute(
        CREATE_SCHEDULE,
        variable_values={"input": _schedule_input(daysOfWeek=[])},
        context_value=_context(db),
    )

    payload = result.data["createClassSchedule"]
    assert payload["success"] is False
    assert payload["errorCode"] == "invalid_input"
    assert payload["schedule"] is None


async def test_register_then_cancel_through_api(db):
    created = await schema.execute(
        CREATE_SCHEDULE,
        variable_values={"input": _schedule_input(scheduleType="single")},
        context_value=_context(db),
    )
    schedule_id = int(created.data["createClassSchedule"]["schedule"]["id"])
    instances = await schema.execute(
        SCHEDULE_INSTANCES, variable_values={"scheduleId": schedule_id}, context_value=_context(db)
    )
    instance_id = instances.data["scheduleInstances"][0]["id"]

    register = """
    mutation Register($input: RegistrationInput!) {
      registerParticipant(input: $input) { success message instance { registeredParticipants waitlist } }
    }
    """
    first = await schema.execute(
        register,
        variable_values={"input": {"instanceId": instance_id, "memberId": 1}},
        context_value=_context(db),
    )
    second = await schema.execute(
        register,
        variable_values={"input": {"instanceId": instance_id, "memberId": 2}},
        context_value=_context(db),
    )

    assert first.data["registerParticipant"]["instance"]["registeredParticipants"] == [1]
    assert second.data["registerParticipant"]["instance"]["waitlist"] == [2]
    assert "waitlist" in second.data["registerParticipant"]["message"]

    cancel = """
    mutation Cancel($id: Int!) {
      startClassInstance(instanceId: $id) { success }
      cancelClassInstance(input: {instanceId: $id, reason: "Late"}) { success errorCode }
    }
    """
    result = await schema.execute(cancel, variable_values={"id": instance_id}, context_value=_context(db))

    assert result.data["startClassInstance"]["success"] is True
    assert result.data["cancelClassInstance"] == {"success": False, "errorCode": "invalid_transition"}


async def test_expand_schedule_preview():
    query = """
    query {
      expandSchedule(input: {
        startDate: "2024-01-01", startTime: "14:00", scheduleType: "recurring",
        daysOfWeek: [1, 3], horizonDays: 14
      }) { success occurrences { date time } }
    }
    """

    result = await schema.execute(query)

    occurrences = result.data["expandSchedule"]["occurrences"]
    assert [o["date"] for o in occurrences] == [
        "2024-01-01", "2024-01-03", "2024-01-08", "2024-01-10", "2024-01-15"
    ]


async def test_membership_freeze_through_api(db):
    plan = await schema.execute(
        """
        mutation {
          createMembershipPlan(input: {name: "Monthly", price: 40, durationValue: 1, durationUnit: "month"}) {
            success plan { id }
          }
        }
        """,
        context_value=_context(db),
    )
    plan_id = plan.data["createMembershipPlan"]["plan"]["id"]

    assigned = await schema.execute(
        """
        mutation Assign($planId: Int!) {
          assignMembership(input: {memberId: 42, planId: $planId}) {
            success membership { id status availableActions }
          }
        }
        """,
        variable_values={"planId": plan_id},
        context_value=_context(db),
    )
    membership = assigned.data["assignMembership"]["membership"]
    assert membership["availableActions"] == ["freeze", "cancel", "suspend"]

    frozen = await schema.execute(
        """
        mutation Freeze($id: Int!) {
          freezeMembership(input: {membershipId: $id, reason: "Trip", durationDays: 10}) {
            success membership { status freezeReason }
          }
          reactivateMembership(input: {membershipId: $id, reason: "x", newEndDate: "2099-01-01"}) {
            success errorCode
          }
        }
        """,
        variable_values={"id": membership["id"]},
        context_value=_context(db),
    )

    assert frozen.data["freezeMembership"]["membership"] == {"status": "frozen", "freezeReason": "Trip"}
    assert frozen.data["reactivateMembership"] == {"success": False, "errorCode": "invalid_transition"}


async def test_update_clears_only_fields_sent_as_null(db):
    created = await schema.execute(
        CREATE_SCHEDULE,
        variable_values={"input": _schedule_input(location="Studio 2", notes="Bring a mat")},
        context_value=_context(db),
    )
    schedule_id = int(created.data["createClassSchedule"]["schedule"]["id"])

    result = await schema.execute(
        """
        mutation Update($id: Int!) {
          updateClassSchedule(input: {scheduleId: $id, location: null, capacity: 5}) {
            success schedule { location notes capacity }
          }
        }
        """,
        variable_values={"id": schedule_id},
        context_value=_context(db),
    )

    payload = result.data["updateClassSchedule"]
    assert payload["success"] is True
    assert payload["schedule"] == {"location": None, "notes": "Bring a mat", "capacity": 5}


async def test_expand_schedule_rejects_oversized_horizon():
    result = await schema.execute(
        """
        query {
          expandSchedule(input: {
            startDate: "2024-01-01", startTime: "09:00", scheduleType: "recurring",
            daysOfWeek: [1], horizonDays: 10000000
          }) { success errorCode }
        }
        """
    )

    assert result.errors is None
    assert result.data["expandSchedule"] == {"success": False, "errorCode": "invalid_input"}


def test_schema_exposes_no_placeholder_fields():
    sdl = schema.as_str()

    assert "hello" not in sdl
    assert "expandSchedule(" in sdl

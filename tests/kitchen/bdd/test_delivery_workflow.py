"""BDD tests for the kitchen delivery workflow."""

from pytest_bdd import parsers, scenarios, then, when

from kitchen.errors import InvalidTransitionError

scenarios("features/delivery_workflow.feature")


@when(parsers.cfparse('the kitchen moves the delivery to "{status}"'), target_fixture="delivery")
def kitchen_moves(delivery, status):
    delivery.transition_to(status, changed_by="KITCHEN")
    return delivery


@when(parsers.cfparse('the admin moves the delivery to "{status}"'), target_fixture="delivery")
def admin_moves(delivery, status):
    delivery.transition_to(status, changed_by="ADMIN")
    return delivery


@when(parsers.cfparse('the kitchen tries to move the delivery to "{status}"'))
def kitchen_tries(delivery, status, error):
    try:
        delivery.transition_to(status, changed_by="KITCHEN")
    except InvalidTransitionError as exc:
        error["exc"] = exc


@then(parsers.cfparse("the delivery history has {count:d} entries"))
def history_length(delivery, count):
    assert len(delivery.history) == count

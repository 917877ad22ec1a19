import pytest
import yaml

from testsuites.unit.fakes import FakeElement
from webkeywords.framework.config_loader import ConfigLoader
from webkeywords.framework.data_source import YamlDataSource
from webkeywords.framework.exceptions import ErrorKind, FrameworkError
from webkeywords.framework.execution import FailureChannel
from webkeywords.framework.reporting import EVENT_FAILURE, EVENT_START, EVENT_SUCCESS
from webkeywords.framework.session import StaleElementError
from webkeywords.keywords import Keywords

pytestmark = pytest.mark.keywords

SOFT = FailureChannel.SOFT
SILENT = FailureChannel.SILENT


@pytest.fixture
def config(tmp_path):
    return ConfigLoader(config_path=tmp_path / "absent.yaml", overrides={"wait.polling_millis": 250})


@pytest.fixture
def kw(session, config, reporter):
    return Keywords(session, config, reporter)


def _events(reporter):
    return [e.event for e in reporter.events]


# =============================================================================
# Waits and visibility
# =============================================================================

def test_wait_for_element_that_becomes_visible(clock, session, kw):
    button = FakeElement(displayed=lambda: clock.now >= 2, name="go")
    session.elements["//button[@id='go']"] = [button]

    assert kw.wait_for_element_visible("//button[@id='go']", "Go button", timeout=5) is button
    assert 2 <= clock.now < 2.25


def test_soft_visibility_check_on_missing_element_returns_false(clock, session, kw, reporter):
    result = kw.verify_element_visible("//div[@id='nope']", "Promo", channel=SOFT, timeout=1)

    assert result is False
    assert 1 <= clock.now <= 1.25
    assert _events(reporter) == [EVENT_START, EVENT_SUCCESS]


def test_soft_visibility_check_on_visible_element_returns_true(clock, session, kw):
    session.elements["//div"] = [FakeElement()]

    assert kw.verify_element_visible("//div", channel=SOFT, timeout=1) is True


def test_hard_visibility_failure_raises_with_context(clock, session, kw, reporter):
    with pytest.raises(FrameworkError) as exc_info:
        kw.verify_element_visible("//div[@id='nope']", "Promo", timeout=1)

    assert exc_info.value.kind == ErrorKind.TIMEOUT
    assert "window-0 main frame" in str(exc_info.value)
    assert _events(reporter) == [EVENT_START, EVENT_FAILURE]


def test_non_positive_timeout_raises_validation_before_touching_session(clock, session, kw):
    for channel in FailureChannel:
        with pytest.raises(FrameworkError) as exc_info:
            kw.click("//a", channel=channel, timeout=0)
        assert exc_info.value.is_validation

    assert session.find_calls == []


def test_silent_keyword_emits_no_events(clock, session, kw, reporter):
    session.elements["//a"] = [FakeElement()]
    kw.click("//a", channel=SILENT, timeout=1)

    with pytest.raises(FrameworkError):
        kw.click("//missing", channel=SILENT, timeout=1)

    assert reporter.events == []


def test_verify_element_not_visible_and_not_present(clock, session, kw):
    session.elements["//spinner"] = [FakeElement(displayed=lambda: clock.now < 1)]

    assert kw.verify_element_not_visible("//spinner", timeout=2) is True
    assert kw.verify_element_not_present("//gone", timeout=1) is True
    assert kw.verify_element_not_present("//spinner", channel=SOFT, timeout=1) is False


def test_state_verifications(clock, session, kw):
    session.elements["//input[@id='agree']"] = [FakeElement(selected=True, enabled=False)]

    assert kw.verify_element_selected("//input[@id='agree']", channel=SOFT, timeout=1) is True
    assert kw.verify_element_disabled("//input[@id='agree']", channel=SOFT, timeout=1) is True
    assert kw.verify_element_enabled("//input[@id='agree']", channel=SOFT, timeout=1) is False
    assert kw.verify_element_not_selected("//input[@id='agree']", channel=SOFT, timeout=1) is False


def test_wait_for_all_elements_visible(clock, session, kw):
    rows = [FakeElement(), FakeElement(displayed=lambda: clock.now >= 1)]
    session.elements["//tr"] = rows

    assert kw.wait_for_all_elements_visible("//tr", timeout=2) == rows
    assert clock.now >= 1


def test_wait_for_seconds_validates_duration(clock, kw):
    kw.wait_for_seconds(2)
    assert clock.sleeps == [2]

    with pytest.raises(FrameworkError) as exc_info:
        kw.wait_for_seconds(-1)
    assert exc_info.value.is_validation


@pytest.mark.parametrize("seconds", ["soon", None, [1]])
def test_wait_for_seconds_rejects_non_numeric_duration(clock, kw, seconds):
    with pytest.raises(FrameworkError) as exc_info:
        kw.wait_for_seconds(seconds)

    assert exc_info.value.is_validation
    assert clock.sleeps == []


def test_wait_for_seconds_accepts_numeric_text(clock, kw):
    kw.wait_for_seconds("1.5")

    assert clock.sleeps == [1.5]


# =============================================================================
# Clicks
# =============================================================================

def test_click_waits_for_clickable(clock, session, kw):
    button = FakeElement(enabled=lambda: clock.now >= 1)
    session.elements["//button"] = [button]

    kw.click("//button", "Submit", timeout=3)

    assert button.actions == ["click"]
    assert clock.now >= 1


def test_click_with_retry_on_unresolvable_locator(clock, session, kw):
    with pytest.raises(FrameworkError) as exc_info:
        kw.click_with_retry("//button[@id='ghost']", "Ghost", max_retries=3, timeout=2)

    retry_error = exc_info.value.cause
    assert len(retry_error.attempts) == 3
    assert [s for s in clock.sleeps if s > 0.25] == [pytest.approx(0.5), pytest.approx(1.0)]
    assert clock.now == pytest.approx(3 * 2 + 1.5)


def test_click_with_retry_recovers_from_stale_element(clock, session, kw):
    stale = FakeElement(stale=True, name="old")
    fresh = FakeElement(name="new")
    session.elements["//button"] = lambda: [fresh] if clock.now >= 0.5 else [stale]

    kw.click_with_retry("//button", max_retries=3, timeout=0.25)

    assert fresh.actions == ["click"]


def test_click_with_retry_rejects_zero_attempts(clock, session, kw):
    with pytest.raises(FrameworkError) as exc_info:
        kw.click_with_retry("//button", max_retries=0, channel=SOFT, timeout=1)

    assert exc_info.value.is_validation
    assert session.find_calls == []


def test_click_if_visible_skips_missing_element(clock, session, kw):
    assert kw.click_if_visible("//button[@id='cookie']", timeout=1) is False

    banner = FakeElement()
    session.elements["//button[@id='cookie']"] = [banner]
    assert kw.click_if_visible("//button[@id='cookie']", timeout=1) is True
    assert banner.actions == ["click"]


def test_soft_click_if_visible_on_missing_element_returns_false(clock, session, kw):
    assert kw.click_if_visible("//button[@id='cookie']", channel=SOFT, timeout=1) is False


def test_click_on_detached_element_is_transient_failure(clock, session, kw):
    session.elements["//b"] = [FakeElement(click_error=lambda: StaleElementError("detached"))]

    with pytest.raises(FrameworkError) as exc_info:
        kw.click("//b", timeout=1)

    assert exc_info.value.kind == ErrorKind.TRANSIENT
    assert isinstance(exc_info.value.cause, StaleElementError)


def test_click_by_index_out_of_range_is_validation_even_when_soft(clock, session, kw):
    session.elements["//li"] = [FakeElement()]

    with pytest.raises(FrameworkError) as exc_info:
        kw.click_by_index("//li", 5, channel=SOFT, timeout=1)

    assert exc_info.value.is_validation


def test_click_by_index(clock, session, kw):
    items = [FakeElement(name="a"), FakeElement(name="b")]
    session.elements["//li"] = items

    kw.click_by_index("//li", 1, timeout=1)

    assert items[1].actions == ["click"]
    assert items[0].actions == []


def test_click_all_re_resolves_each_match(clock, session, kw):
    page = {"items": []}
    clicked = []

    def _item(index):
        element = FakeElement(name=f"item-{index}")

        def _click():
            element._check()
            clicked.append(element.name)
            for old in page["items"]:
                old.stale = True
            _render()

        element.click = _click
        return element

    def _render():
        page["items"] = [_item(i) for i in range(3)]

    _render()
    session.elements["//item"] = lambda: page["items"]

    assert kw.click_all("//item", timeout=1) == 3
    assert clicked == ["item-0", "item-1", "item-2"]


def test_click_child(clock, session, kw):
    link = FakeElement(name="edit")
    row = FakeElement(name="row")
    row.children[".//a[text()='Edit']"] = [link]
    session.elements["//tr[1]"] = [row]

    kw.click_child("//tr[1]", ".//a[text()='Edit']", "Edit link", timeout=1)

    assert link.actions == ["click"]


def test_click_using_js(clock, session, kw):
    target = FakeElement()
    session.elements["//button"] = [target]
    session.script_handler = lambda script, element: element.click()

    kw.click_using_js("//button", timeout=1)

    assert session.scripts[0][0] == "arguments[0].click();"
    assert target.actions == ["click"]


def test_double_right_click_and_hover(clock, session, kw):
    element = FakeElement()
    session.elements["//div"] = [element]

    kw.double_click("//div", timeout=1)
    kw.right_click("//div", timeout=1)
    kw.hover("//div", timeout=1)

    assert element.actions == ["double_click", "right_click", "hover"]


def test_drag_and_drop(clock, session, kw, reporter):
    card = FakeElement(name="card")
    lane = FakeElement(displayed=lambda: clock.now >= 0.5, name="lane")
    session.elements["//div[@class='card']"] = [card]
    session.elements["//div[@id='done']"] = [lane]

    kw.drag_and_drop("//div[@class='card']", "//div[@id='done']", "Card", "Done lane", timeout=1)

    assert card.actions == [("drag_to", "lane")]
    assert reporter.events[0].target == "Card -> Done lane"


def test_drag_and_drop_onto_missing_target_fails(clock, session, kw):
    card = FakeElement(name="card")
    session.elements["//div[@class='card']"] = [card]

    assert kw.drag_and_drop("//div[@class='card']", "//div[@id='gone']", channel=SOFT, timeout=1) is False
    assert card.actions == []


def test_scroll_to_element(clock, session, kw):
    footer = FakeElement(displayed=False)
    session.elements["//footer"] = [footer]

    kw.scroll_to_element("//footer", "Footer", timeout=1)

    assert footer.actions == ["scroll"]


# =============================================================================
# Text input and reads
# =============================================================================

def test_enter_text_clears_then_types_and_masks_value(clock, session, kw, reporter):
    field = FakeElement(value="old")
    session.elements["//input[@id='pwd']"] = [field]

    kw.enter_text("//input[@id='pwd']", "secret", "Password", timeout=1)

    assert field.value == "secret"
    assert field.actions == ["clear", ("send_keys", "secret")]
    assert reporter.events[0].description == "Enter text 'se****'"


def test_enter_text_from_external_source(clock, session, tmp_path, reporter):
    data_path = tmp_path / "data.yaml"
    data_path.write_text(yaml.dump({"login_valid": {"username": "demo_user"}}), encoding="utf-8")
    kw = Keywords(session, data_source=YamlDataSource(data_path), reporter=reporter)
    field = FakeElement(value="")
    session.elements["//input"] = [field]

    kw.enter_text("//input", "username", use_external_source=True, test_case="login_valid", timeout=1)
    kw.append_text("//input", "!", timeout=1)

    assert field.value == "demo_user!"


def test_external_source_enabled_from_config(clock, session, tmp_path):
    data_path = tmp_path / "data.yaml"
    data_path.write_text(yaml.dump({"login_valid": {"username": "demo_user"}}), encoding="utf-8")
    config = ConfigLoader(
        config_path=tmp_path / "absent.yaml",
        overrides={"data.enabled": True, "data.file": str(data_path)},
    )

    kw = Keywords(session, config)

    assert kw.data_source.lookup("login_valid", "username") == "demo_user"


def test_external_source_without_data_source_is_validation_error(clock, session, kw):
    with pytest.raises(FrameworkError) as exc_info:
        kw.enter_text("//input", "username", use_external_source=True, test_case="login_valid",
                      channel=SOFT, timeout=1)

    assert exc_info.value.is_validation


def test_enter_text_requires_text(clock, session, kw):
    with pytest.raises(FrameworkError) as exc_info:
        kw.enter_text("//input", "", channel=SOFT, timeout=1)

    assert exc_info.value.is_validation


def test_enter_text_and_press_key(clock, session, kw):
    field = FakeElement(value="")
    session.elements["//input"] = [field]

    kw.enter_text_and_press_key("//input", "query", "Enter", timeout=1)

    assert field.actions[-1] == ("press", "Enter")
    assert field.value == "query"


def test_clear_text(clock, session, kw):
    field = FakeElement(value="abc")
    session.elements["//input"] = [field]

    kw.clear_text("//input", timeout=1)

    assert field.value == ""


def test_select_option_strategies(clock, session, kw):
    dropdown = FakeElement()
    session.elements["//select"] = [dropdown]

    kw.select_option("//select", "Canada", timeout=1)
    kw.select_option("//select", "ca", by="value", timeout=1)
    kw.select_option("//select", "2", by="index", timeout=1)

    assert [a[1] for a in dropdown.actions] == [
        {"value": None, "label": "Canada", "index": None},
        {"value": "ca", "label": None, "index": None},
        {"value": None, "label": None, "index": 2},
    ]


@pytest.mark.parametrize("option, by", [("two", "index"), ("Canada", "text")])
def test_select_option_rejects_bad_input(clock, session, kw, option, by):
    with pytest.raises(FrameworkError) as exc_info:
        kw.select_option("//select", option, by=by, channel=SOFT, timeout=1)

    assert exc_info.value.is_validation


def test_get_text_attribute_and_value(clock, session, kw):
    session.elements["//input"] = [FakeElement(text="  Label  ", value="typed", attributes={"type": "text"})]

    assert kw.get_text("//input", timeout=1) == "Label"
    assert kw.get_attribute("//input", "type", timeout=1) == "text"
    assert kw.get_input_value("//input", timeout=1) == "typed"


def test_soft_get_text_on_missing_element_returns_none(clock, session, kw):
    assert kw.get_text("//missing", channel=SOFT, timeout=1) is None


def test_soft_reads_pass_through_none_values(clock, session, kw):
    session.elements["//input"] = [FakeElement(value=None, attributes={})]

    assert kw.get_attribute("//input", "title", channel=SOFT, timeout=1) is None
    assert kw.get_input_value("//input", channel=SOFT, timeout=1) is None
    assert kw.execute_script("return null;", channel=SOFT) is None


def test_soft_reads_pass_through_empty_values(clock, session, kw):
    session.elements["//input"] = [FakeElement(text="", value="", attributes={"title": ""})]

    assert kw.get_text("//input", channel=SOFT, timeout=1) == ""
    assert kw.get_attribute("//input", "title", channel=SOFT, timeout=1) == ""
    assert kw.get_input_value("//input", channel=SOFT, timeout=1) == ""


# =============================================================================
# Text and page verifications
# =============================================================================

def test_verify_text_equals_reports_expected_and_found(clock, session, kw):
    session.elements["//h1"] = [FakeElement(text="Loading...")]

    with pytest.raises(FrameworkError) as exc_info:
        kw.verify_text_equals("//h1", "Welcome", "Banner", timeout=1)

    assert "Text of [Banner] expected 'Welcome' but found 'Loading...'" in str(exc_info.value)
    assert exc_info.value.cause.last_value == "Loading..."


def test_verify_text_equals_waits_for_text(clock, session, kw):
    session.elements["//h1"] = [FakeElement(text=lambda: "Welcome " if clock.now >= 1 else "Loading...")]

    assert kw.verify_text_equals("//h1", "Welcome", channel=SOFT, timeout=2) is True


def test_verify_text_without_element_reports_context(clock, session, kw):
    with pytest.raises(FrameworkError) as exc_info:
        kw.verify_text_contains("//h1", "Wel", "Banner", timeout=1)

    assert "but found nothing (NoSuchElementError in window-0 main frame)" in str(exc_info.value)


def test_verify_text_reports_detached_element_not_earlier_text(clock, session, kw):
    session.elements["//h1"] = [FakeElement(text="Loading...", stale=lambda: clock.now > 0)]

    with pytest.raises(FrameworkError) as exc_info:
        kw.verify_text_equals("//h1", "Welcome", "Banner", timeout=1)

    assert "but found nothing (StaleElementError in window-0 main frame)" in str(exc_info.value)
    assert exc_info.value.cause.last_value is None


def test_verify_text_contains_soft_mismatch(clock, session, kw):
    session.elements["//p"] = [FakeElement(text="Order pending")]

    assert kw.verify_text_contains("//p", "pending", channel=SOFT, timeout=1) is True
    assert kw.verify_text_contains("//p", "shipped", channel=SOFT, timeout=1) is False


def test_verify_attribute_and_input_value(clock, session, kw):
    session.elements["//input"] = [FakeElement(value="42", attributes={"class": "btn btn-primary"})]

    assert kw.verify_attribute_equals("//input", "class", "btn btn-primary", channel=SOFT, timeout=1) is True
    assert kw.verify_attribute_contains("//input", "class", "primary", channel=SOFT, timeout=1) is True
    assert kw.verify_input_value_equals("//input", "42", channel=SOFT, timeout=1) is True
    assert kw.verify_input_value_equals("//input", "43", channel=SOFT, timeout=1) is False


def test_verify_title_and_url(clock, session, kw):
    session._title = "Dashboard - Shop"
    session._url = "https://shop.example.com/dashboard"

    assert kw.verify_title_equals("Dashboard - Shop", channel=SOFT, timeout=1) is True
    assert kw.verify_title_contains("Dashboard", channel=SOFT, timeout=1) is True
    assert kw.verify_url_equals("https://shop.example.com/dashboard", channel=SOFT, timeout=1) is True
    assert kw.verify_url_contains("/dashboard", channel=SOFT, timeout=1) is True

    with pytest.raises(FrameworkError) as exc_info:
        kw.verify_title_equals("Login", timeout=1)
    assert "Page title expected 'Login' but found 'Dashboard - Shop'" in str(exc_info.value)


def test_verify_element_count(clock, session, kw):
    session.elements["//li"] = [FakeElement(), FakeElement()]

    assert kw.verify_element_count("//li", 2, channel=SOFT, timeout=1) is True

    with pytest.raises(FrameworkError) as exc_info:
        kw.verify_element_count("//li", 3, "List items", timeout=1)
    assert "Number of [List items] expected '3' but found '2'" in str(exc_info.value)


def test_verify_alert_text(clock, session, kw):
    session.alerts.append("Saved!")

    assert kw.verify_alert_text("Saved!", channel=SOFT, timeout=1) is True
    assert session.alerts == ["Saved!"]


# =============================================================================
# Page waits
# =============================================================================

def test_page_waits(clock, session, kw):
    session._title = lambda: "Ready" if clock.now >= 1 else "Loading"
    session._url = "https://example.com/done"
    session.windows = lambda: ["window-0", "window-1"] if clock.now >= 1 else ["window-0"]

    assert kw.wait_for_title_is("Ready", timeout=2) is True
    assert kw.wait_for_title_contains("Rea", timeout=1) is True
    assert kw.wait_for_url_to_be("https://example.com/done", timeout=1) is True
    assert kw.wait_for_url_contains("done", timeout=1) is True
    assert kw.wait_for_number_of_windows(2, timeout=1) is True


def test_element_waits(clock, session, kw):
    field = FakeElement(text="Total: 10", value="abc", attributes={"class": "active"})
    session.elements["//x"] = [field]

    assert kw.wait_for_element_present("//x", timeout=1) is field
    assert kw.wait_for_element_clickable("//x", timeout=1) is field
    assert kw.wait_for_element_enabled("//x", timeout=1) is field
    assert kw.wait_for_text_in_element("//x", "Total", timeout=1) is field
    assert kw.wait_for_value_in_input("//x", "ab", timeout=1) is field
    assert kw.wait_for_attribute_to_contain("//x", "class", "act", timeout=1) is field
    assert kw.wait_for_element_count("//x", 1, timeout=1) is True
    assert kw.wait_for_element_selected("//x", channel=SOFT, timeout=1) is None


def test_wait_for_element_invisible_and_javascript(clock, session, kw):
    session.elements["//overlay"] = [FakeElement(stale=lambda: clock.now >= 0.5)]
    session.script_handler = lambda script: clock.now >= 1

    assert kw.wait_for_element_invisible("//overlay", timeout=1) is True
    assert kw.wait_for_javascript_condition("return document.readyState === 'complete';", timeout=2) is True


# =============================================================================
# Browser and context
# =============================================================================

def test_navigation_keywords(session, kw):
    kw.navigate_to("https://example.com")
    kw.refresh()
    kw.back()
    kw.forward()

    assert session.history == ["https://example.com", "refresh", "back", "forward"]


def test_switch_to_frame_waits_for_frame(clock, session, kw):
    session.frames["payment"] = lambda: clock.now >= 1

    kw.switch_to_frame("payment", timeout=2)

    assert session.current_context() == "window-0 frame 'payment'"
    kw.switch_to_parent_frame()
    assert session.current_context() == "window-0 main frame"


def test_switch_to_missing_frame_times_out(clock, session, kw):
    assert kw.switch_to_frame(3, channel=SOFT, timeout=1) is False

    with pytest.raises(FrameworkError) as exc_info:
        kw.switch_to_frame(-1, timeout=1)
    assert exc_info.value.is_validation


def test_switch_to_default_content(clock, session, kw):
    session.frames[0] = True
    kw.switch_to_frame(0, timeout=1)

    kw.switch_to_default_content()

    assert session.context_stack == []


def test_switch_to_window_by_index_waits_for_window(clock, session, kw):
    session.windows = lambda: ["window-0", "window-1"] if clock.now >= 1 else ["window-0"]

    assert kw.switch_to_window(1, timeout=2) == "window-1"
    assert session.current_window == "window-1"


def test_switch_to_window_by_handle(clock, session, kw):
    session.windows = ["window-0", "popup"]

    assert kw.switch_to_window("popup", timeout=1) == "popup"
    assert kw.switch_to_window("missing", channel=SOFT, timeout=1) is None


def test_alert_keywords(clock, session, kw):
    session.alerts.extend(["Delete item?", "Name?", "Done"])

    assert kw.get_alert_text(timeout=1) == "Delete item?"
    kw.dismiss_alert(timeout=1)
    kw.send_alert_text("Alice", timeout=1)
    kw.accept_alert(timeout=1)
    kw.accept_alert(timeout=1)

    assert session.alert_actions == [
        ("dismiss", "Delete item?"),
        ("send", "Alice"),
        ("accept", "Name?"),
        ("accept", "Done"),
    ]
    assert kw.accept_alert(channel=SOFT, timeout=1) is False


def test_execute_script_and_press_key(session, kw):
    session.script_handler = lambda script, a, b: a + b

    assert kw.execute_script("return arguments[0] + arguments[1];", 2, 3) == 5
    kw.press_key("Escape")

    assert session.keys == ["Escape"]


def test_scroll_page_keywords(session, kw):
    kw.scroll_to_bottom()
    kw.scroll_to_top()

    assert [script for script, _ in session.scripts] == [
        "window.scrollTo(0, document.body.scrollHeight);",
        "window.scrollTo(0, 0);",
    ]

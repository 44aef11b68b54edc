import pytest

from tapguard.core.schemas import ElementNode, Frame


def build_element(**overrides) -> ElementNode:
    frame = overrides.pop("frame", (100, 100, 100, 44))
    if not isinstance(frame, Frame):
        frame = Frame(*frame)
    overrides.setdefault("type", "button")
    return ElementNode(frame=frame, **overrides)


def build_ui_tree() -> ElementNode:
    return build_element(
        type="application",
        identifier="root",
        frame=(0, 0, 430, 932),
        children=[
            build_element(
                type="navigationBar",
                identifier="nav-bar",
                label="Navigation",
                frame=(0, 0, 430, 88),
                children=[
                    build_element(identifier="back-button", label="Back", frame=(8, 44, 44, 44)),
                    build_element(
                        type="staticText",
                        identifier="title",
                        label="Settings",
                        value="Settings",
                        frame=(150, 44, 130, 44),
                    ),
                ],
            ),
            build_element(
                type="scrollView",
                identifier="main-scroll",
                frame=(0, 88, 430, 844),
                children=[
                    build_element(identifier="login-button", label="Log In", frame=(100, 200, 230, 50)),
                    build_element(identifier="signup-button", label="Sign Up", frame=(100, 270, 230, 50)),
                    build_element(
                        type="textField",
                        identifier="email-field",
                        label="Email",
                        placeholder="Enter your email",
                        frame=(20, 350, 390, 44),
                    ),
                    build_element(
                        type="secureTextField",
                        identifier="password-field",
                        label="Password",
                        placeholder="Enter password",
                        frame=(20, 410, 390, 44),
                    ),
                    build_element(
                        identifier="disabled-button",
                        label="Disabled Button",
                        is_enabled=False,
                        frame=(100, 500, 230, 50),
                    ),
                    build_element(
                        identifier="hidden-button",
                        label="Hidden Button",
                        is_visible=False,
                        frame=(100, 570, 230, 50),
                    ),
                    build_element(
                        identifier="not-hittable-button",
                        label="Not Hittable",
                        is_hittable=False,
                        frame=(100, 640, 230, 50),
                    ),
                    build_element(identifier="zero-size-button", label="Zero Size", frame=(100, 710, 0, 0)),
                ],
            ),
        ],
    )


@pytest.fixture
def make_element():
    return build_element


@pytest.fixture
def ui_tree() -> ElementNode:
    return build_ui_tree()

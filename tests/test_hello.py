from curator.operations.hello import hello_world


def test_hello_world_function_returns_hello_world_string():
    assert hello_world() == "hello world!"
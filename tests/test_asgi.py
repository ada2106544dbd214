from socketio import ASGIApp


def test_asgi_application_mounts_socketio():
    from config.asgi import application
    from post_relay.realtime.socketio import sio

    assert isinstance(application, ASGIApp)
    assert application.engineio_server is sio

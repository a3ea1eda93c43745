from reading_room.main import create_app, run

app = create_app()

if __name__ == "__main__":
    run()

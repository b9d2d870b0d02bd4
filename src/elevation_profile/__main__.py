from elevation_profile.cli import main

if __name__ == "__main__":
    main()

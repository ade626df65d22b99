from gitignore_downloader import main

main()

from ollama_refresh.cli import main

main()

from discogs_load.cli import main


# Local execution without installing the console script, e.g.
# python run.py --batch-size 5000 discogs_20240201_releases.xml.gz
if __name__ == "__main__":
    main()

from shopcart import create_app

app = create_app()

if __name__ == "__main__":
    # threaded: requests share the one cart store
    app.run(host="0.0.0.0", port=app.config["PORT"], threaded=True)

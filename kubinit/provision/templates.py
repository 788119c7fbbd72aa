"""
Cloud-init templates for MicroK8s machines.

MicroK8s serves the API on 16443, the rules below redirect 6443 to it so
load balancers can use the usual port.
"""

WRITE_FILES = """\
{% if write_files %}
write_files:
{% for file in write_files %}
- content: |2
{{ file.content | yaml_indent(4) }}
  path: {{ file.path }}
  permissions: '{{ file.permissions }}'
{% endfor %}
{% endif %}
"""

INSTALL_MICROK8S = """\
- sudo iptables -t nat -A OUTPUT -o lo -p tcp --dport 6443 -j REDIRECT --to-port 16443
- sudo iptables -A PREROUTING -t nat  -p tcp --dport 6443 -j REDIRECT --to-port 16443
- sudo apt-get update
- sudo apt-get install iptables-persistent
- sudo sh -c "while ! snap install microk8s --classic {{ version }} ; do sleep 10 ; echo 'Retry snap installation'; done"
"""

CONTROL_PLANE_INIT = "{{ header }}\n" + WRITE_FILES + """\
runcmd:
- sudo echo ControlPlaneEndpoint {{ control_plane_endpoint }}
- sudo echo ControlPlaneEndpointType {{ control_plane_endpoint_type }}
- sudo echo JoinTokenTTLInSecs {{ join_token_ttl_in_secs }}
- sudo echo Version {{ version }}
""" + INSTALL_MICROK8S + """\
- sudo sed -i 's/25000/{{ port_of_cluster_agent }}/' /var/snap/microk8s/current/args/cluster-agent
- sudo grep Address /var/snap/microk8s/current/var/kubernetes/backend/info.yaml > /var/tmp/port-update.yaml
- sudo sed -i 's/19001/{{ port_of_dqlite }}/' /var/tmp/port-update.yaml
- sudo microk8s stop
- sudo mv /var/tmp/port-update.yaml /var/snap/microk8s/current/var/kubernetes/backend/update.yaml
- sudo microk8s start
- sudo microk8s status --wait-ready
- sudo microk8s refresh-certs /var/tmp
- sudo sleep 30
- sudo sed -i '/^DNS.1 = kubernetes/a {{ control_plane_endpoint_type }}.100 = {{ control_plane_endpoint }}' /var/snap/microk8s/current/certs/csr.conf.template
- sudo microk8s status --wait-ready
- sudo microk8s add-node --token-ttl {{ join_token_ttl_in_secs }} --token {{ join_token }}
- sudo sh -c "for a in {{ addons | shell_words }} ; do echo 'Enabling ' \\$a ; microk8s enable \\$a ; sleep 10; microk8s status --wait-ready ; done"
- sudo sleep 15
- {{ sentinel_file_command }}
"""

CONTROL_PLANE_JOIN = "{{ header }}\n" + WRITE_FILES + """\
runcmd:
- sudo echo ControlPlaneEndpoint {{ control_plane_endpoint }}
- sudo echo ControlPlaneEndpointType {{ control_plane_endpoint_type }}
- sudo echo JoinTokenTTLInSecs {{ join_token_ttl_in_secs }}
- sudo echo IPOfNodeToJoin {{ ip_of_node_to_join }}
- sudo echo PortOfNodeToJoin {{ port_of_node_to_join }}
- sudo echo Version {{ version }}
""" + INSTALL_MICROK8S + """\
- sudo microk8s status --wait-ready
- sudo sed -i 's/25000/{{ port_of_node_to_join }}/' /var/snap/microk8s/current/args/cluster-agent
- sudo grep Address /var/snap/microk8s/current/var/kubernetes/backend/info.yaml > /var/tmp/port-update.yaml
- sudo sed -i 's/19001/{{ port_of_dqlite }}/' /var/tmp/port-update.yaml
- sudo microk8s stop
- sudo mv /var/tmp/port-update.yaml /var/snap/microk8s/current/var/kubernetes/backend/update.yaml
- sudo microk8s start
- sudo microk8s status --wait-ready
- sudo sed -i '/^DNS.1 = kubernetes/a {{ control_plane_endpoint_type }}.100 = {{ control_plane_endpoint }}' /var/snap/microk8s/current/certs/csr.conf.template
- sudo sleep 10
- sudo microk8s status --wait-ready
- sudo sh -c "while ! microk8s join {{ ip_of_node_to_join }}:{{ port_of_node_to_join }}/{{ join_token }} ; do sleep 10 ; echo 'Retry join'; done"
- sudo sleep 20
- sudo microk8s status --wait-ready
- sudo microk8s add-node --token-ttl {{ join_token_ttl_in_secs }} --token {{ join_token }}
- {{ sentinel_file_command }}
"""

WORKER_JOIN = "{{ header }}\n" + WRITE_FILES + """\
runcmd:
- sudo echo ControlPlaneEndpoint {{ control_plane_endpoint }}
- sudo echo IPOfNodeToJoin {{ ip_of_node_to_join }}
- sudo echo PortOfNodeToJoin {{ port_of_node_to_join }}
- sudo echo Version {{ version }}
""" + INSTALL_MICROK8S + """\
- sudo microk8s status --wait-ready
- sudo sh -c "while ! microk8s join {{ ip_of_node_to_join }}:{{ port_of_node_to_join }}/{{ join_token }} --worker ; do sleep 10 ; echo 'Retry join'; done"
- sudo sleep 20
- {{ sentinel_file_command }}
"""
